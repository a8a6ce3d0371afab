# assembler.py
"""
Collection assembly: the per-slot loop.

Slots 1..K are taken verbatim from the legendary table. Every other slot
samples one trait per participating layer, rejects DNA already seen in the
run (up to MAX_DNA_ATTEMPTS tries) and composites the accepted selection.
"""
import enum
import math
import random
from dataclasses import dataclass, field

from nft_studio.catalog import TraitCatalog
from nft_studio.compositor import (
    DEFAULT_CANVAS_SIZE,
    ImageCache,
    build_draw_ops,
    composite,
    encode_png,
    legendary_draw_ops,
)
from nft_studio.dna import DnaTracker, dna_key, legendary_dna
from nft_studio.errors import ConfigurationError, DnaExhaustion
from nft_studio.legendary import LegendaryTable
from nft_studio.logs import safe_log
from nft_studio.sampler import sample_layers

MAX_DNA_ATTEMPTS = 100
MAX_SUPPLY_LIMIT = 10000


class RunState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED_EARLY = "aborted_early"
    FAILED = "failed"


@dataclass(frozen=True)
class CollectionSettings:
    name: str
    description: str = ""
    total_supply: int = 1
    symbol: str = ""
    canvas_size: tuple = DEFAULT_CANVAS_SIZE
    excluded_layers: tuple = ()

    def validate(self, legendary_count=0):
        if isinstance(self.total_supply, bool) or not isinstance(self.total_supply, int):
            raise ConfigurationError(f"Total supply must be an integer, got {self.total_supply!r}")
        if self.total_supply < 1:
            raise ConfigurationError("Total supply must be at least 1")
        if self.total_supply > MAX_SUPPLY_LIMIT:
            raise ConfigurationError(f"Total supply {self.total_supply} exceeds limit {MAX_SUPPLY_LIMIT}")
        if self.total_supply < legendary_count:
            raise ConfigurationError(
                f"Total supply {self.total_supply} is smaller than the {legendary_count} legendary items"
            )
        w, h = self.canvas_size
        if w < 1 or h < 1:
            raise ConfigurationError(f"Invalid canvas size {w}x{h}")


@dataclass(frozen=True)
class GeneratedNFT:
    id: int
    name: str
    description: str
    image: bytes
    dna: str
    attributes: tuple = field(default_factory=tuple)
    is_legendary: bool = False


@dataclass(frozen=True)
class GenerationResult:
    """
    termination: 'completed', 'exhausted' or 'cancelled'
    warnings: AssetLoadWarning instances collected while loading images
    """

    records: tuple
    state: RunState
    termination: str
    warnings: tuple = ()
    exhaustion: DnaExhaustion = None

    def __iter__(self):
        # allows: records, state = generate(...)
        return iter((self.records, self.state))

    @property
    def aborted_early(self):
        return self.state is RunState.ABORTED_EARLY


def progress_percent(done, total):
    # half-up rounding keeps the stream non-decreasing
    return int(math.floor(done * 100 / total + 0.5))


class CollectionAssembler:
    """One instance per run."""

    def __init__(
        self,
        catalog,
        settings,
        legendaries=None,
        rng=None,
        progress_callback=None,
        log_callback=None,
        should_cancel=None,
        max_attempts=MAX_DNA_ATTEMPTS,
    ):
        self.catalog = catalog if isinstance(catalog, TraitCatalog) else TraitCatalog(catalog)
        self.settings = settings
        if isinstance(legendaries, LegendaryTable):
            self.legendaries = legendaries.snapshot()
        else:
            self.legendaries = LegendaryTable(legendaries)
        self.rng = rng or random.Random()
        self.progress_callback = progress_callback
        self.log_callback = log_callback
        self.should_cancel = should_cancel
        self.max_attempts = max_attempts

        self.state = RunState.IDLE
        self.tracker = DnaTracker()
        self.layers = []
        self.cache = None

    def _validate(self):
        k = self.legendaries.slot_count()
        self.settings.validate(legendary_count=k)
        self.layers = self.catalog.validate(
            excluded=self.settings.excluded_layers,
            require_layers=self.settings.total_supply > k,
        )

    def run(self):
        if self.state is not RunState.IDLE:
            raise RuntimeError(f"Assembler already used (state={self.state.value})")
        self.state = RunState.RUNNING
        try:
            self._validate()
        except ConfigurationError as e:
            self.state = RunState.FAILED
            safe_log(self.log_callback, f"❌ {e}")
            raise

        self.cache = ImageCache.preload(
            self.layers, self.legendaries, self.settings.canvas_size, log_callback=self.log_callback
        )

        total = self.settings.total_supply
        records = []
        termination = "completed"
        exhaustion = None

        for slot in range(1, total + 1):
            if self.should_cancel and self.should_cancel():
                termination = "cancelled"
                safe_log(self.log_callback, f"⏹️ Cancelled before #{slot}, {len(records)}/{total} generated.")
                break

            item = self.legendaries.item_for_slot(slot)
            try:
                if item is not None:
                    record = self._legendary_record(slot, item)
                else:
                    record = self._sampled_record(slot)
            except DnaExhaustion as e:
                termination = "exhausted"
                exhaustion = e
                safe_log(self.log_callback, f"❌ {e}. Stopping early, {len(records)}/{total} generated.")
                break

            records.append(record)
            safe_log(self.log_callback, f"✅ Generated #{slot}")
            if self.progress_callback:
                self.progress_callback(progress_percent(slot, total))

        self.state = RunState.COMPLETED if termination == "completed" else RunState.ABORTED_EARLY
        return GenerationResult(
            records=tuple(records),
            state=self.state,
            termination=termination,
            warnings=tuple(self.cache.warnings),
            exhaustion=exhaustion,
        )

    def _legendary_record(self, slot, item):
        image = composite(legendary_draw_ops(item), self.cache)
        return GeneratedNFT(
            id=slot,
            name=item.name or f"{self.settings.name} #{slot}",
            description=item.description or self.settings.description,
            image=encode_png(image),
            dna=legendary_dna(item),
            attributes=item.resolved_attributes(),
            is_legendary=True,
        )

    def sample_unique(self, slot):
        for _ in range(self.max_attempts):
            selection = sample_layers(self.layers, rng=self.rng)
            key = dna_key(selection)
            if self.tracker.try_accept(key):
                return selection, key
        raise DnaExhaustion(slot, self.max_attempts)

    def _sampled_record(self, slot):
        selection, key = self.sample_unique(slot)
        image = composite(build_draw_ops(selection), self.cache)
        attributes = tuple({"trait_type": layer.name, "value": trait.name} for layer, trait in selection)
        return GeneratedNFT(
            id=slot,
            name=f"{self.settings.name} #{slot}",
            description=self.settings.description,
            image=encode_png(image),
            dna=key,
            attributes=attributes,
            is_legendary=False,
        )


def generate(
    catalog,
    settings,
    legendaries=None,
    on_progress=None,
    rng=None,
    should_cancel=None,
    log_callback=None,
):
    """
    Runs one generation and returns a GenerationResult.
    Raises ConfigurationError before any image work if the inputs are unusable.
    """
    assembler = CollectionAssembler(
        catalog,
        settings,
        legendaries,
        rng=rng,
        progress_callback=on_progress,
        log_callback=log_callback,
        should_cancel=should_cancel,
    )
    return assembler.run()
