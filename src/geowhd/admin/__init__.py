"""GeoWHD Admin API"""
