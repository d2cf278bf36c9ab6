"""
tmux integration for running a generated campaign.
"""

import shutil
import subprocess
from typing import List, Optional, Sequence

from aflfleet.fuzzing.config import FuzzerInvocation
from aflfleet.utils.logging import get_logger

logger = get_logger(__name__)


class TmuxSession:
    """
    Detached tmux session with one window per runner.

    Windows are named after the fuzzer names so they match the
    directories afl-fuzz creates under the output directory.
    """

    def __init__(self, name: str, runners: Sequence[FuzzerInvocation]):
        if not runners:
            raise ValueError("A tmux session needs at least one runner")
        self.name = name
        self.runners = list(runners)
        self.tmux = "tmux"

    def window_name(self, runner: FuzzerInvocation) -> str:
        name = runner.name or f"runner{runner.index}"
        # "." and ":" separate panes and windows in tmux targets
        return name.replace(".", "_").replace(":", "_")

    def build(self) -> List[List[str]]:
        """
        Build the tmux invocations that start the campaign.

        Returns:
            List of argv lists, to be run in order
        """
        cmds = []
        for position, runner in enumerate(self.runners):
            window = self.window_name(runner)
            if position == 0:
                cmds.append([self.tmux, "new-session", "-d", "-s", self.name, "-n", window])
            else:
                cmds.append([self.tmux, "new-window", "-t", self.name, "-n", window])
            cmds.append([
                self.tmux, "send-keys", "-t", f"{self.name}:{window}",
                runner.to_command(), "Enter",
            ])
        return cmds

    def exists(self) -> bool:
        """Check whether a session with this name is already running."""
        result = subprocess.run(
            [self.tmux, "has-session", "-t", self.name],
            capture_output=True,
        )
        return result.returncode == 0

    def launch(self) -> None:
        """
        Start the session.

        Raises:
            FileNotFoundError: If tmux is not installed
            FileExistsError: If the session already exists
            subprocess.CalledProcessError: If a tmux call fails
        """
        tmux_path: Optional[str] = shutil.which("tmux")
        if not tmux_path:
            raise FileNotFoundError("tmux not found in $PATH")
        self.tmux = tmux_path

        if self.exists():
            raise FileExistsError(f"tmux session '{self.name}' already exists")

        for cmd in self.build():
            logger.debug(f"Running: {' '.join(cmd[:4])}")
            subprocess.run(cmd, check=True, capture_output=True)

        logger.info(
            f"Started {len(self.runners)} runner(s) in tmux session '{self.name}', "
            f"attach with: tmux attach -t {self.name}"
        )
