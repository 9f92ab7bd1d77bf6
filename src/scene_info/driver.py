# ABOUTME: Main report driver
# ABOUTME: Fetches every record in fixed category order, then renders the report

import logging
import sys
from typing import Dict, List, Optional, TextIO

from .bounds import BoundsCalculator
from .config import ReportConfig
from .names import NameResolver
from .records import Category, IMAGE_CATEGORIES
from .references import REFERENCE_TARGETS, ReferenceAnalyzer
from .reporters import Entry, ObjectReporter, Style, build_reporters
from .source import RecordSource
from .utils.logging_utils import LOGGER_NAME, Timer, TimingStats


# Categories that are fetched, in report order. Objects have no records of
# their own and are rendered right after scenes.
FETCH_ORDER = (
    Category.SCENE,
    Category.ANIMATION,
    Category.SKIN2D,
    Category.SKIN3D,
    Category.LIGHT,
    Category.MATERIAL,
    Category.MESH,
    Category.TEXTURE,
    Category.IMAGE1D,
    Category.IMAGE2D,
    Category.IMAGE3D,
)

# Categories fetched level by level
LEVELED_CATEGORIES = (Category.MESH,) + IMAGE_CATEGORIES


class ReportDriver:
    """
    Produces the info report of one asset.

    The run happens in two phases. First every selected record is fetched
    in category, id and level order; a failed fetch marks the run as failed
    and is skipped, the source having already printed why. Successful
    records are summarized right away and fed to the reference analyzer.
    Then, with reference counts complete, all entries are written to the
    sink. Nothing is kept between runs.

    Usage:
        driver = ReportDriver(source, ReportConfig(meshes=True, compute_bounds=True))
        failed = driver.run()
        print(driver.elapsed)
    """

    def __init__(self, source: RecordSource, config: Optional[ReportConfig] = None,
                 sink: Optional[TextIO] = None):
        """Initialize driver with a source, configuration and output stream."""
        self.source = source
        self.config = config or ReportConfig()
        self.sink = sink if sink is not None else sys.stdout
        self.logger = logging.getLogger(LOGGER_NAME)
        self.elapsed = None
        self.timing_stats: List[TimingStats] = []

    def _wants(self, category: Category) -> bool:
        # Scenes are needed for the object listing even when not printed
        if category is Category.SCENE:
            return self.config.selected(Category.SCENE) or self.config.selected(Category.OBJECT)
        return self.config.selected(category)

    def run(self) -> bool:
        """
        Run the whole report.

        Returns:
            True if any record failed to be retrieved
        """
        self.timing_stats = []
        with Timer("Asset info", self.logger, level=logging.DEBUG) as timer:
            supported = self.source.capabilities()
            counts = {c: self.source.count(c) for c in Category if c in supported}

            style = Style(self.config.use_color(self.sink))
            names = NameResolver(self.source)
            bounds = BoundsCalculator(self.logger) if self.config.compute_bounds else None
            reporters = build_reporters(names, style, bounds)
            objects = reporters[Category.OBJECT]

            with Timer("Fetch", self.logger, level=logging.DEBUG) as fetch_timer:
                analyzer, entries, failed = self._fetch(supported, counts, reporters, objects)

            with Timer("Render", self.logger, level=logging.DEBUG) as render_timer:
                self._render(supported, counts, reporters, objects, analyzer, entries)

        self.elapsed = timer.elapsed
        stats = TimingStats("Asset info", timer.elapsed)
        stats.add_substep("Fetch", fetch_timer.elapsed)
        stats.add_substep("Render", render_timer.elapsed)
        self.timing_stats.append(stats)

        return failed

    def _fetch(self, supported, counts: Dict[Category, int], reporters,
               objects: ObjectReporter):
        """Fetch all records, returning the analyzer, entries and failure flag."""
        fetched = [c for c in FETCH_ORDER if c in supported and self._wants(c)]
        collect_objects = Category.OBJECT in supported and self.config.selected(Category.OBJECT)

        # Only sources that have records make their targets' counts meaningful
        analyzer = ReferenceAnalyzer(counts)
        for category in fetched:
            if category in REFERENCE_TARGETS and counts.get(category, 0) > 0:
                analyzer.track(category)

        entries: List[Entry] = []
        failures = 0
        for category in fetched:
            reporter = reporters[category]
            printed = self.config.selected(category)

            for id in range(counts.get(category, 0)):
                levels = 1
                if category in LEVELED_CATEGORIES:
                    levels = self.source.level_count(category, id)

                entry = None
                for level in range(levels):
                    record = self.source.fetch(category, id, level)
                    if record is None:
                        failures += 1
                        continue

                    analyzer.add(category, id, record)
                    if category is Category.SCENE and collect_objects:
                        objects.add_scene(id, record)
                    if not printed:
                        continue

                    if entry is None:
                        entry = Entry(category, id, self.source.name(category, id))
                        entries.append(entry)
                    entry.lines.extend(reporter.describe(category, id, record, level))

        if failures:
            self.logger.debug("%d records could not be retrieved", failures)
        return analyzer, entries, failures > 0

    def _render(self, supported, counts, reporters, objects: ObjectReporter,
                analyzer: ReferenceAnalyzer, entries: List[Entry]) -> None:
        lines = []
        for entry in entries:
            if entry.category is Category.SCENE:
                lines.extend(reporters[Category.SCENE].render(entry, analyzer))

        if Category.OBJECT in supported and self.config.selected(Category.OBJECT):
            lines.extend(objects.render_all(
                counts.get(Category.OBJECT, 0),
                lambda obj: self.source.name(Category.OBJECT, obj)))

        for entry in entries:
            if entry.category is not Category.SCENE:
                lines.extend(reporters[entry.category].render(entry, analyzer))

        for line in lines:
            self.sink.write(line + '\n')
