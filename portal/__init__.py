"""
Estate portal: property listings, complexes and agent directory.
"""
