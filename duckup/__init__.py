"""
duckup - the duck compiler toolchain manager.
"""
