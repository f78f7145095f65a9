"""Aiken source generators"""
