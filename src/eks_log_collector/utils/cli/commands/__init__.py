# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
CLI command implementations package.

One module per collection mode. Commands are imported lazily; use
get_command_function() to obtain them.
"""


def get_command_function(command_name: str):
    """
    Dynamically import and return a command function.

    Args:
        command_name: Name of the command to import

    Returns:
        The command function
    """
    if command_name == "collect_logs":
        from .collect import collect_logs

        return collect_logs
    elif command_name == "enable_debug":
        from .enable_debug import enable_debug

        return enable_debug
    else:
        raise ValueError(f"Unknown command: {command_name}")


__all__ = ["get_command_function"]
