"""Declaration parsers"""
