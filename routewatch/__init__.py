"""
routewatch

External watchdog for the lab web application: extracts route registrations
from the server source, detects new routes, probes them over HTTP and runs
parameterized HTTP assertion lists (security audit, LGPD, deploy checks).
"""
