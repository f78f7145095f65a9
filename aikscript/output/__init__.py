"""Aiken project manifest output"""
