"""
Monitoring Module

Contains all call-relay functionality including:
- Dashboard login and browser session handling
- Live call extraction and deduplication
- Telegram notification pipeline
"""
