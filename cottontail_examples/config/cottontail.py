import os


class Cottontail:
    def __init__(self, config: dict | None = None) -> None:
        conn_cfg = (config or {}).get("cottontail", {})
        self.HOST: str = str(conn_cfg.get("host", os.getenv("COTTONTAIL_HOST", "127.0.0.1")))
        self.PORT: int = int(conn_cfg.get("port", os.getenv("COTTONTAIL_PORT", "1865")))
        timeout_raw = conn_cfg.get("timeout", os.getenv("COTTONTAIL_TIMEOUT", ""))
        # Per-call deadline in seconds; unset means block until the server answers.
        self.TIMEOUT: float | None = float(timeout_raw) if str(timeout_raw).strip() else None

    @property
    def target(self) -> str:
        return f"{self.HOST}:{self.PORT}"
