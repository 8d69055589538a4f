"""Speed-test source that shells out to the Ookla speedtest CLI."""

import logging
import subprocess

from speedlog.errors import MeasurementFailed

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "speedtest"
# Non-interactive consent plus machine-readable output on stdout.
SPEEDTEST_ARGS = ["--accept-license", "--accept-gdpr", "--format=json", "--progress=no"]


class SpeedTestCollector:
    """Runs the external speed-test binary once per invoke().

    Standard error never reaches the parsed payload; it is only logged.
    No retries happen here: the next scheduled tick is the retry.
    """

    def __init__(self, command: str = DEFAULT_COMMAND, timeout_s: float | None = None):
        """Initialize collector.

        Args:
            command: Path or name of the speed-test binary
            timeout_s: Seconds to wait before killing the binary. None waits
                       indefinitely.
        """
        if timeout_s is not None and timeout_s <= 0:
            raise ValueError("timeout_s must be positive")

        self.command = command
        self.timeout_s = timeout_s

    def build_command(self) -> list[str]:
        return [self.command, *SPEEDTEST_ARGS]

    def invoke(self) -> str:
        """Run one speed test and return its standard output.

        Raises:
            MeasurementFailed: binary missing or not launchable, timed out,
                               or no output was produced
        """
        cmd = self.build_command()
        logger.debug("Executing speed test: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                shell=False,
            )
        except FileNotFoundError as e:
            raise MeasurementFailed(f"speed test binary not found: {self.command}") from e
        except subprocess.TimeoutExpired as e:
            raise MeasurementFailed(f"speed test timed out after {self.timeout_s}s") from e
        except OSError as e:
            raise MeasurementFailed(f"speed test could not be launched: {e}") from e

        if result.stderr:
            logger.debug("Speed test stderr: %s", result.stderr.strip())

        stdout = result.stdout or ""
        if result.returncode != 0:
            logger.warning("Speed test exited with code %d", result.returncode)

        if not stdout.strip():
            raise MeasurementFailed(f"speed test produced no output (exit code {result.returncode})")

        return stdout
