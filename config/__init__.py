"""
Configuration for the live call relay.
"""
