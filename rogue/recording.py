"""
Record rendered session frames to a video file with PyAV.
"""

import sys
from typing import Optional

import av
import numpy as np


class SessionRecorder:
    """
    Encodes BGR frames into a video file.

    Frame dimensions must be even (yuv420p). Call close() to flush the
    encoder, or use the recorder as a context manager.
    """

    def __init__(
        self,
        output_path: str,
        width: int,
        height: int,
        fps: int = 10,
        codec: str = "mpeg4",
    ) -> None:
        self.output_path = output_path
        self.width = width
        self.height = height
        self.fps = fps
        self.codec = codec

        self.container: Optional[av.container.OutputContainer] = None
        self.video_stream: Optional[av.stream.Stream] = None
        self.frame_count = 0

    def start(self) -> None:
        self.container = av.open(self.output_path, mode="w")
        self.video_stream = self.container.add_stream(self.codec, rate=self.fps)
        self.video_stream.width = self.width
        self.video_stream.height = self.height
        self.video_stream.pix_fmt = "yuv420p"
        self.frame_count = 0
        print(f"Recording to {self.output_path} ({self.width}x{self.height} @ {self.fps}fps)", file=sys.stderr)

    def write_frame(self, frame_bgr: np.ndarray) -> bool:
        """
        Encode one frame.

        Returns:
            False if the recorder is not started or the frame has the wrong size.
        """
        if not self.video_stream or not self.container:
            return False

        height, width = frame_bgr.shape[:2]
        if (width, height) != (self.width, self.height):
            print(
                f"Skipping frame of size {width}x{height}, expected {self.width}x{self.height}",
                file=sys.stderr,
            )
            return False

        # Convert BGR to RGB
        frame_rgb = np.ascontiguousarray(frame_bgr[:, :, ::-1])
        video_frame = av.VideoFrame.from_ndarray(frame_rgb, format="rgb24")
        video_frame.pts = self.frame_count

        for packet in self.video_stream.encode(video_frame):
            self.container.mux(packet)

        self.frame_count += 1
        return True

    def close(self) -> None:
        if self.container is None:
            return
        try:
            # Flush video encoder
            if self.video_stream:
                for packet in self.video_stream.encode():
                    self.container.mux(packet)
            self.container.close()
        finally:
            self.container = None
            self.video_stream = None
        print(f"Recorded {self.frame_count} frames to {self.output_path}", file=sys.stderr)

    def __enter__(self) -> "SessionRecorder":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
