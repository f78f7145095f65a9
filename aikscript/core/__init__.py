"""Core models, configuration and pipeline"""
