"""ECS failure alert relay.

Classifies ECS deployment and task state-change events and relays
actionable failures to Slack and email.
"""

__version__ = "0.1.0"
