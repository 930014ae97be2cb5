#!/usr/bin/env python3
"""Example: poll a list of variables on an interval; graceful shutdown on Ctrl+C."""

import sys
import time

from pyopto22 import ErrorLog, PACController
from pyopto22.errors import PyOpto22Error, RemoteError


def main() -> None:
    host = "192.168.1.10"  # change to your controller IP
    names = ["iCount", "bReady", "fSetpoint", "itCounts"]
    interval_s = 1.0

    try:
        with PACController(host, "admin", "changeme", error_log=ErrorLog("rest_errors.csv", "csv")) as plc:
            print(f"Polling {names} every {interval_s}s (Ctrl+C to stop)...")
            while True:
                plc.clear_cache()
                print(plc.read_many(names))
                time.sleep(interval_s)
    except KeyboardInterrupt:
        print("\nStopped.")
    except RemoteError as e:
        print(f"REST error: {e}", file=sys.stderr)
        sys.exit(1)
    except PyOpto22Error as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
