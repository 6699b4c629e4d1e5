class DrainTimeoutError(TimeoutError):
    def __init__(self, in_flight: int):
        self.in_flight = in_flight
        super().__init__(f"{in_flight} request(s) still in flight at the drain deadline")

class CleanupError(Exception):
    def __init__(self, name: str, cause: BaseException):
        self.name = name
        super().__init__(f"cleanup '{name}' failed: {str(cause) or type(cause).__name__}")

class CleanupTimeoutError(CleanupError):
    def __init__(self, name: str, overrun: float):
        self.name = name
        self.overrun = overrun
        Exception.__init__(self, f"cleanup '{name}' overran its deadline by {overrun:.3f}s")
