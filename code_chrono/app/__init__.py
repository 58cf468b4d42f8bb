"""UI-facing application context and state objects.

- Single command entry: context.dispatch(cmd, payload)
- UI binding via state QObjects (context.domain / context.timer / context.theme / ...)
- Python→UI notifications via context.event
"""
