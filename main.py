#!/usr/bin/env python3
"""
Live Call Relay - Main Entry Point

Logs in to the carrier dashboard, watches the live calls page and relays
each new call to Telegram (instant alert, then the recording).

Usage:
    python main.py [--headless] [--refresh-minutes N] [--debug]
"""

import argparse
import sys


def positive_float(value):
    """argparse type: a number greater than zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def positive_int(value):
    """argparse type: a whole number greater than zero."""
    number = positive_float(value)
    if number != int(number):
        raise argparse.ArgumentTypeError(f"must be a whole number, got {value}")
    return int(number)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Live Call Relay")

    parser.add_argument("--headless", action="store_true", default=None, help="Run Chrome without a window")
    parser.add_argument("--max-login-attempts", type=positive_int, help="Login attempts before giving up")
    parser.add_argument("--refresh-minutes", type=positive_float, help="Keep-alive page refresh interval")
    parser.add_argument("--log-file", help="Log file path")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    from services.monitoring_daemon import main as run_daemon
    overrides = {
        "headless": args.headless,
        "max_login_attempts": args.max_login_attempts,
        "refresh_interval_minutes": args.refresh_minutes,
        "log_file": args.log_file,
    }
    print("🚀 Starting Live Call Relay...")
    return run_daemon(overrides=overrides, debug=args.debug)


if __name__ == "__main__":
    sys.exit(main())
