#!/usr/bin/env python3
"""Example: connect to a controller and read/write a few strategy variables by name."""

import sys

from pyopto22 import PACController
from pyopto22.errors import InvalidValueError, PyOpto22Error, ReadOnlyError, RemoteError


def main() -> None:
    host = "192.168.1.10"  # change to your controller IP
    username = "admin"  # REST API key name
    password = "changeme"  # REST API key value

    try:
        with PACController(host, username, password, load_device=True) as plc:
            print(f"Controller: {plc.device_info.controller_type} running {plc.strategy_info.strategy_name}")

            # Scalars: one GET per category, then served from cache
            print(f"iCount = {plc.get('iCount')}")
            print(f"bReady = {plc.get('bReady')}")  # same request as iCount

            # Attribute-style access
            print(f"fSetpoint = {plc.vars.fSetpoint}")

            # Write a scalar (validated before the POST)
            plc.set("iCount", 10)

            # Tables: item assignment writes one element
            counts = plc.get("itCounts")
            print(f"itCounts = {counts.to_list()}")
            # counts[1] = 9

            # Explain a name
            print(f"explain(aoValve): {plc.explain('aoValve')}")
            print(f"{plc.request_count} requests")
    except (InvalidValueError, ReadOnlyError) as e:
        print(f"Rejected: {e}", file=sys.stderr)
        sys.exit(1)
    except RemoteError as e:
        print(f"REST error: {e}", file=sys.stderr)
        sys.exit(1)
    except PyOpto22Error as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
