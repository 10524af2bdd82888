"""
Real estate deal calculator.
"""
