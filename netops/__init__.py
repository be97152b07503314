"""
netops package marker.
"""
