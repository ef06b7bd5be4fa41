"""Host-facing hooks.

``plugin`` holds the hook dispatcher the host loads in-process;
``dispatcher`` adapts the same bindings for hosts that run hooks as
processes with a JSON payload on stdin.
"""
