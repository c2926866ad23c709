"""
Frame clock for animated images.

Driven by the application calling `update(delta)` once per tick. Not thread
safe; one driver per instance.
"""

from .const import PlayType
from .errors import NegativePerFrame


class FrameTimer(object):
    """
    Tracks the current frame for one animation.

    Usage:
        timer = FrameTimer(frame_count=4, per_frame=0.1, play_type=PlayType.LOOPS)
        timer.update(dt)  # every tick
        frame = timer.current_frame
    """

    def __init__(self, frame_count: int, per_frame: float, play_type: PlayType):
        """
        Args:
            frame_count: Number of frames (>= 1)
            per_frame: Seconds each frame is shown (> 0)
            play_type: Playback mode; only looping modes start playing
        """
        if frame_count < 1:
            raise ValueError(f"frame_count must be at least 1, got {frame_count}")
        if not per_frame > 0.0:
            raise NegativePerFrame(per_frame)
        self._frame_count = frame_count
        self._per_frame = float(per_frame)
        self._play_type = play_type
        self._current_frame = 0
        self._next_frame_time = self._per_frame
        self._animate = play_type.is_looping
        # only used by LOOPS_BOTH
        self._loop_increasing = True

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def current_frame(self) -> int:
        return self._current_frame

    @property
    def play_type(self) -> PlayType:
        return self._play_type

    @property
    def per_frame(self) -> float:
        return self._per_frame

    @property
    def animate(self) -> bool:
        return self._animate

    @property
    def loop_increasing(self) -> bool:
        return self._loop_increasing

    @property
    def next_frame_time(self) -> float:
        """Seconds until the next frame change."""
        return self._next_frame_time

    def set_animate(self, animate: bool) -> None:
        """Play (True) or pause (False)."""
        self._animate = animate

    def set_per_frame(self, seconds: float) -> None:
        if not seconds > 0.0:
            raise NegativePerFrame(seconds)
        self._per_frame = float(seconds)

    def skip_to_next_frame(self) -> None:
        """Change frame on the next `update`, however much time is left."""
        self._next_frame_time = -0.1

    def delay_next_frame(self, seconds: float) -> None:
        """Show the current frame for `seconds` longer, once."""
        self._next_frame_time += seconds

    def set_play_type(self, play_type: PlayType) -> None:
        """Change play type and `reset`."""
        self._play_type = play_type
        self.reset()

    def set_just_play_type(self, play_type: PlayType) -> None:
        """Change play type without touching anything else."""
        self._play_type = play_type

    def reset(self) -> None:
        """
        Restart the frame timer, then depending on play type:

        - ONCE: frame 0, paused
        - ONCE_REVERSED: last frame, paused
        - LOOPS, LOOPS_REVERSED, LOOPS_BOTH: frame 0, playing
        """
        if self._play_type == PlayType.ONCE:
            frame, animate = 0, False
        elif self._play_type == PlayType.ONCE_REVERSED:
            frame, animate = self._frame_count - 1, False
        else:
            frame, animate = 0, True
        self._current_frame = frame
        self._animate = animate
        self._next_frame_time = self._per_frame

    def reverse(self) -> None:
        """
        ONCE <-> ONCE_REVERSED, LOOPS <-> LOOPS_REVERSED.

        LOOPS_BOTH only flips its direction.
        """
        if self._play_type == PlayType.ONCE:
            self._play_type = PlayType.ONCE_REVERSED
        elif self._play_type == PlayType.ONCE_REVERSED:
            self._play_type = PlayType.ONCE
        elif self._play_type == PlayType.LOOPS:
            self._play_type = PlayType.LOOPS_REVERSED
        elif self._play_type == PlayType.LOOPS_REVERSED:
            self._play_type = PlayType.LOOPS
        else:
            self._loop_increasing = not self._loop_increasing

    def update(self, delta: float) -> None:
        """
        Advance the clock by `delta` seconds.

        At most one frame step happens per call, however large `delta` is.
        """
        if not self._animate:
            return
        self._next_frame_time -= delta
        if self._next_frame_time > 0.0:
            return
        self._next_frame_time = self._per_frame
        self._step()

    def _step(self) -> None:
        last = self._frame_count - 1
        play_type = self._play_type
        if play_type == PlayType.ONCE:
            self._current_frame += 1
            if self._current_frame > last:
                self.reset()
        elif play_type == PlayType.ONCE_REVERSED:
            if self._current_frame > 0:
                self._current_frame -= 1
            else:
                self.reset()
        elif play_type == PlayType.LOOPS:
            self._current_frame += 1
            if self._current_frame > last:
                self._current_frame = 0
        elif play_type == PlayType.LOOPS_REVERSED:
            if self._current_frame > 0:
                self._current_frame -= 1
            else:
                self._current_frame = last
        elif self._loop_increasing:
            if self._current_frame < last:
                self._current_frame += 1
            if self._current_frame >= last:
                self._loop_increasing = False
        else:
            if self._current_frame > 0:
                self._current_frame -= 1
            if self._current_frame <= 0:
                self._loop_increasing = True
