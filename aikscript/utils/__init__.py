"""File and project utilities"""
