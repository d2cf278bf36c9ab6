"""
Parallel AFL++ campaign synthesis.

Builds the afl-fuzz command lines for a campaign of N runners: one main
fuzzer and N-1 secondaries, each with a different mix of environment
toggles, mutation strategies, power schedules and cmplog settings.
Nothing is executed here.
"""

import random
from pathlib import Path
from typing import List, Optional

from aflfleet.core.harness import Harness
from aflfleet.core.resolver import PathLike, find_afl_fuzz, resolve_file
from aflfleet.fuzzing.config import (
    SCHEDULES,
    CmplogLevel,
    FuzzerInvocation,
    FuzzerRole,
    InputFormat,
    MutationMode,
    RunnerConfig,
)
from aflfleet.fuzzing.distribution import (
    apply_args,
    apply_exclusive_args,
    apply_flags,
    share,
)
from aflfleet.utils.config import AFL_CORPUS, AFL_OUTPUT
from aflfleet.utils.logging import get_logger

logger = get_logger(__name__)

# Environment toggles
DISABLE_TRIM_SHARE = 0.65
KEEP_TIMEOUTS_SHARE = 0.5
EXPAND_HAVOC_NOW_SHARE = 0.4

# Mutation strategies
MODE_ARGS = [(MutationMode.EXPLORE, 0.4), (MutationMode.EXPLOIT, 0.2)]
FORMAT_ARGS = [(InputFormat.BINARY, 0.3), (InputFormat.TEXT, 0.3)]
MIN_LENGTH = 0
MIN_LENGTH_SHARE = 0.1

SEQUENTIAL_QUEUE_SHARE = 0.2

# CMPLOG
CMPLOG_SHARE = 0.3
CMPLOG_ARGS = [
    (CmplogLevel.LEVEL_2, 0.7),
    (CmplogLevel.LEVEL_3, 0.1),
    (CmplogLevel.LEVEL_2_AUTO_TOKEN, 0.2),
]
# Levels for campaigns with at most three cmplog slots, in slot order
FIXED_CMPLOG_LEVELS = [
    CmplogLevel.LEVEL_2,
    CmplogLevel.LEVEL_2_AUTO_TOKEN,
    CmplogLevel.LEVEL_3,
]

SEED_NAME = "1"
SEED_CONTENT = "fuzz"


class Campaign:
    """
    Parallel AFL++ campaign.

    Validates the shared resources on construction and synthesizes a
    fresh command set on every call to generate_commands().

    Slot 0 is the main fuzzer and runs the sanitizer build when one is
    available. Roughly 30% of the secondaries run with cmplog when a
    cmplog build is available.
    """

    def __init__(
        self,
        harness: Harness,
        runners: int = 1,
        afl_binary: Optional[PathLike] = None,
        input_dir: PathLike = AFL_CORPUS,
        output_dir: PathLike = AFL_OUTPUT,
        dictionary: Optional[PathLike] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize campaign.

        Args:
            harness: Target builds and arguments
            runners: Number of afl-fuzz processes
            afl_binary: Optional explicit path to afl-fuzz
            input_dir: Corpus directory, created and seeded if missing
            output_dir: Output directory, must be missing or empty
            dictionary: Optional dictionary file
            rng: Random source for the distribution stages
            seed: Seed for a fresh random source when rng is not given

        Raises:
            ValueError: If runners is below 1, or the input directory is
                or lies inside the output directory
            FileNotFoundError: If afl-fuzz cannot be found
            NotADirectoryError: If a directory path names a file
            FileExistsError: If the output directory is not empty
        """
        if runners < 1:
            raise ValueError(f"At least one runner is required, got {runners}")

        self.harness = harness
        self.runners = runners
        self.afl_binary = find_afl_fuzz(afl_binary)

        input_path = Path(input_dir).expanduser()
        output_path = Path(output_dir).expanduser()
        # Validate both before touching the filesystem
        self._check_directory(input_path, require_empty=False)
        self._check_directory(output_path, require_empty=True)
        self._check_overlap(input_path, output_path)

        self.input_dir = self._prepare_input_dir(input_path)
        self.output_dir = self._prepare_output_dir(output_path)

        self.dictionary = resolve_file(dictionary)
        if dictionary and self.dictionary is None:
            logger.warning(f"Dictionary not found, ignoring: {dictionary}")

        self.rng = rng or random.Random(seed)

    @staticmethod
    def _check_directory(path: Path, require_empty: bool) -> None:
        if path.is_file():
            raise NotADirectoryError(f"{path} is a file")
        if require_empty and path.is_dir() and any(path.iterdir()):
            raise FileExistsError(f"{path} exists and is not empty")

    @staticmethod
    def _check_overlap(input_path: Path, output_path: Path) -> None:
        # The seed or the corpus directory would land in the output directory
        resolved_input = input_path.resolve()
        resolved_output = output_path.resolve()
        if resolved_input == resolved_output or resolved_output in resolved_input.parents:
            raise ValueError(
                f"Input directory {input_path} must not be inside output directory {output_path}"
            )

    @staticmethod
    def _prepare_input_dir(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        if not any(path.iterdir()):
            (path / SEED_NAME).write_text(SEED_CONTENT)
            logger.debug("Created initial seed file")
        return path.resolve()

    @staticmethod
    def _prepare_output_dir(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        return path.resolve()

    @property
    def cmplog_runners(self) -> int:
        """Number of runners that get a cmplog build."""
        if self.harness.cmplog_binary is None:
            return 0
        return share(self.runners, CMPLOG_SHARE)

    def generate_commands(self) -> List[str]:
        """
        Synthesize the campaign and render one command per runner.

        Returns:
            Command lines, main fuzzer first
        """
        return [slot.to_command() for slot in self.synthesize()]

    def synthesize(self) -> List[FuzzerInvocation]:
        """
        Run the synthesis pipeline.

        Returns:
            One invocation record per runner, main fuzzer first
        """
        configs = self.initialize_configs()
        slots = self.create_invocations(configs)

        for stage in (
            self.apply_mutation_strategies,
            self.apply_queue_selection,
            self.apply_power_schedules,
            self.set_directories,
            self.set_fuzzer_roles,
            self.apply_dictionary,
            self.set_sanitizer_or_target_binary,
            self.configure_cmplog,
            self.apply_target_args,
        ):
            stage(slots)
            logger.debug(f"Applied stage {stage.__name__}")

        logger.info(
            f"Generated {len(slots)} runner(s) for {self.harness.name}, "
            f"{sum(slot.uses_cmplog for slot in slots)} with cmplog"
        )
        return slots

    def initialize_configs(self) -> List[RunnerConfig]:
        configs = [RunnerConfig() for _ in range(self.runners)]
        configs[-1].final_sync = True

        apply_flags(configs, "disable_trim", DISABLE_TRIM_SHARE, self.rng)
        apply_flags(configs, "keep_timeouts", KEEP_TIMEOUTS_SHARE, self.rng)
        apply_flags(configs, "expand_havoc_now", EXPAND_HAVOC_NOW_SHARE, self.rng)
        return configs

    def create_invocations(self, configs: List[RunnerConfig]) -> List[FuzzerInvocation]:
        return [
            FuzzerInvocation(index=i, afl_binary=self.afl_binary, env=config)
            for i, config in enumerate(configs)
        ]

    def apply_mutation_strategies(self, slots: List[FuzzerInvocation]) -> None:
        apply_exclusive_args(slots, "mode", MODE_ARGS, self.rng)
        apply_exclusive_args(slots, "input_format", FORMAT_ARGS, self.rng)
        apply_args(slots, "min_length", MIN_LENGTH, MIN_LENGTH_SHARE, self.rng)

    def apply_queue_selection(self, slots: List[FuzzerInvocation]) -> None:
        apply_args(slots, "sequential_queue", True, SEQUENTIAL_QUEUE_SHARE, self.rng)

    def apply_power_schedules(self, slots: List[FuzzerInvocation]) -> None:
        # Round-robin, every schedule is in use once there are 7 runners
        for i, slot in enumerate(slots):
            slot.power_schedule = SCHEDULES[i % len(SCHEDULES)]

    def set_directories(self, slots: List[FuzzerInvocation]) -> None:
        for slot in slots:
            slot.input_dir = self.input_dir
            slot.output_dir = self.output_dir

    def set_fuzzer_roles(self, slots: List[FuzzerInvocation]) -> None:
        target_name = self.harness.name
        slots[0].role = FuzzerRole.MAIN
        slots[0].name = f"main_{target_name}"
        for i, slot in enumerate(slots[1:]):
            slot.role = FuzzerRole.SECONDARY
            slot.name = f"secondary_{i}_{target_name}"

    def apply_dictionary(self, slots: List[FuzzerInvocation]) -> None:
        if self.dictionary is None:
            return
        for slot in slots:
            slot.dictionary = self.dictionary

    def set_sanitizer_or_target_binary(self, slots: List[FuzzerInvocation]) -> None:
        slots[0].binary = self.harness.sanitizer_binary or self.harness.target_binary

    def configure_cmplog(self, slots: List[FuzzerInvocation]) -> None:
        """
        Bind the secondaries to their binaries.

        With k = floor(N * 0.3) cmplog slots, slots 1..k run the cmplog
        build. Up to three slots get fixed levels (2, 2AT, 3) so that a
        supplied cmplog build is always used once there are enough
        runners. Larger campaigns split slots 1..k by weight: 70% level 2,
        10% level 3, 20% level 2AT. All other secondaries run the plain
        target binary.
        """
        count = self.cmplog_runners
        cmplog_binary = self.harness.cmplog_binary
        target = self.harness.target_binary

        if cmplog_binary and count == 0:
            logger.info("Not enough runners to spare one for cmplog")

        cmplog_slots = slots[1:count + 1]
        if count > len(FIXED_CMPLOG_LEVELS):
            apply_exclusive_args(cmplog_slots, "cmplog_level", CMPLOG_ARGS, self.rng)
        else:
            for slot, level in zip(cmplog_slots, FIXED_CMPLOG_LEVELS):
                slot.cmplog_level = level

        for slot in cmplog_slots:
            slot.cmplog_binary = cmplog_binary
            slot.binary = target

        for slot in slots[count + 1:]:
            slot.binary = target

    def apply_target_args(self, slots: List[FuzzerInvocation]) -> None:
        if not self.harness.target_args:
            return
        for slot in slots:
            slot.target_args = self.harness.target_args
