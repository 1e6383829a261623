"""
treeshelp.api.routers

HTTP routers: auth service, trees, files, species catalogue and health probes.
"""

# Package marker.
