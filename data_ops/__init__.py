"""
Data operations package for Python-side sample processing.

Provides histogram binning whose counts are handed to the gnuplot session
as an x/y plot.
"""
