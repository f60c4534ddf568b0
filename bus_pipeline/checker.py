import logging

logger = logging.getLogger(__name__)


class ProtocolViolation(AssertionError):
    pass


class HandshakeChecker:
    """Flags a sender that drops `valid` or changes `payload` before `ready`."""
    def __init__(self, name="stream"):
        self.name      = name
        self.cycle     = 0
        self.transfers = 0
        self._pending  = None

    def reset(self):
        self._pending = None

    def observe(self, valid, payload, ready):
        pending, self._pending = self._pending, None
        if pending is not None:
            if not valid:
                raise ProtocolViolation(
                    f"{self.name}: valid withdrawn at cycle {self.cycle} before transfer "
                    f"of payload {pending:#x}")
            if payload != pending:
                raise ProtocolViolation(
                    f"{self.name}: payload changed from {pending:#x} to {payload:#x} at "
                    f"cycle {self.cycle} while waiting for ready")
        if valid and ready:
            self.transfers += 1
            logger.debug("%s: transfer %#x at cycle %d", self.name, payload, self.cycle)
        elif valid:
            self._pending = payload
        self.cycle += 1
        return bool(valid and ready)
