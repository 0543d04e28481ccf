"""Static lifecycle: the instance already exists at a configured address."""

import logging

from rigbox.errors import ClientError

logger = logging.getLogger(__name__)

STATE_KEYS = ("hostname", "username", "port")


class StaticLifecycle:
    """Records a pre-existing host in the instance state. Nothing is created or destroyed remotely."""

    def __init__(self, config):
        self.config = config

    def create(self, state):
        if not self.config.get("hostname"):
            raise ClientError("The static driver requires 'hostname' in the driver config")
        for key in STATE_KEYS:
            if self.config.get(key):
                state[key] = self.config[key]
        logger.info(f"Using existing instance at {state['hostname']}")

    def destroy(self, state):
        if not state.get("hostname"):
            return
        logger.info(f"Forgetting instance at {state['hostname']}")
        for key in STATE_KEYS:
            state.pop(key, None)


LIFECYCLES = {
    "static": StaticLifecycle,
}


def for_lifecycle(name, config):
    """Instantiate the lifecycle registered as *name*, or None when no name is configured."""
    if name is None:
        return None
    lifecycle_class = LIFECYCLES.get(name)
    if lifecycle_class is None:
        supported = ", ".join(sorted(LIFECYCLES))
        raise ClientError(f"Unknown driver '{name}'. Supported drivers: {supported}")
    return lifecycle_class(config)
