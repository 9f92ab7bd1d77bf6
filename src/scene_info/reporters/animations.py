# ABOUTME: Reporter for animations and their tracks
# ABOUTME: Shows durations, track targets, value types and interpolation behavior

from typing import List

from ..records import AnimationData, AnimationTrackData, Category
from .common import CategoryReporter, format_data, format_value, plural


class AnimationReporter(CategoryReporter):
    categories = (Category.ANIMATION,)

    def describe(self, category, id, animation: AnimationData, level=0) -> List[str]:
        lines = [
            f"  Duration: {format_value(animation.duration)} "
            f"({format_data(animation.data_size, animation.data_flags)})"
        ]
        for i, track in enumerate(animation.tracks):
            lines.extend(self.describe_track(i, track, animation))
        return lines

    def describe_track(self, i: int, track: AnimationTrackData,
                       animation: AnimationData) -> List[str]:
        value = track.value_type
        if track.result_type and track.result_type != track.value_type:
            value += f" -> {track.result_type}"
        target_type = self.names.resolve(Category.ANIMATION, track.target_type)

        lines = [f"  Track {i}: {target_type} @ {value}, {plural(len(track.keys), 'keyframe')}"]
        # Only shown when the track doesn't span the whole animation
        if track.duration is not None and track.duration != tuple(animation.duration):
            lines.append(f"    Duration: {format_value(track.duration)}")
        lines.append(
            f"    Interpolation: {track.interpolation.label}, "
            f"{track.before.label}, {track.after.label}"
        )
        lines.append(f"    Target: object {track.target}")
        return lines
