# Infrastructure routes (unversioned)
# All application routes are in v1/
from . import health as health, prometheus as prometheus
