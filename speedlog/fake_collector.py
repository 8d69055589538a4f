"""Fake speed-test source for testing and simulation."""

import json
import random


class FakeSpeedTest:
    """Generates plausible speed-test JSON documents without touching the network."""

    def __init__(self, seed: int | None = None):
        """Initialize with optional random seed for deterministic behavior."""
        self._random = random.Random(seed)

        # Simulation parameters
        self.base_download_mbps = 250.0
        self.base_upload_mbps = 40.0
        self.base_latency = 18.0  # ms
        self.latency_variance = 4.0
        self.failure_probability = 0.05  # chance of empty output
        self.isp = "Example Broadband"
        self.server_name = "Example Server"
        self.server_location = "Springfield, IL"

    def _bandwidth(self, mbps: float) -> int:
        """Bytes/second for a throughput jittered around ``mbps``."""
        jittered = max(0.5, self._random.gauss(mbps, mbps * 0.1))
        return int(jittered * 1_000_000 / 8)

    def run(self) -> str:
        """Return one JSON document, or an empty string to simulate a failed run."""
        if self._random.random() < self.failure_probability:
            return ""

        latency = max(0.1, self._random.gauss(self.base_latency, self.latency_variance))
        result_id = "%08x" % self._random.getrandbits(32)
        document = {
            "type": "result",
            "ping": {"jitter": round(self._random.uniform(0.1, 3.0), 3), "latency": round(latency, 3)},
            "download": {"bandwidth": self._bandwidth(self.base_download_mbps)},
            "upload": {"bandwidth": self._bandwidth(self.base_upload_mbps)},
            "packetLoss": 0,
            "isp": self.isp,
            "server": {"name": self.server_name, "location": self.server_location},
            "result": {"url": f"https://www.speedtest.net/result/c/{result_id}"},
        }
        return json.dumps(document)
