"""
Drill Team Choreographer - Drill Data Model

The drill is the root aggregate: an ordered sequence of frames plus
metadata. Frame order defines the routine.

Timestamp invariant: frame i starts at the sum of the durations of
frames 0..i-1 (frame 0 always starts at 0). Call recompute_timestamps()
after any change to frame order or durations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Any, Optional

from constants import DEFAULT_FRAME_DURATION
from models.frame import Frame
from models.horse import new_id


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_date(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if not value:
        return _now()
    # Accept the trailing 'Z' written by other clients
    return datetime.fromisoformat(str(value).replace('Z', '+00:00'))


@dataclass
class DrillMetadata:
    created_at: datetime = field(default_factory=_now)
    modified_at: datetime = field(default_factory=_now)
    author: Optional[str] = None
    description: Optional[str] = None

    def clone(self) -> 'DrillMetadata':
        return DrillMetadata(self.created_at, self.modified_at, self.author, self.description)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'createdAt': self.created_at.isoformat(),
            'modifiedAt': self.modified_at.isoformat(),
        }
        if self.author is not None:
            data['author'] = self.author
        if self.description is not None:
            data['description'] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DrillMetadata':
        return cls(
            created_at=_parse_date(data.get('createdAt')),
            modified_at=_parse_date(data.get('modifiedAt')),
            author=data.get('author'),
            description=data.get('description'),
        )


@dataclass
class AudioTrack:
    url: str
    offset: float = 0.0  # seconds
    filename: Optional[str] = None

    def clone(self) -> 'AudioTrack':
        return AudioTrack(self.url, self.offset, self.filename)

    def to_dict(self) -> Dict[str, Any]:
        data = {'url': self.url, 'offset': self.offset}
        if self.filename is not None:
            data['filename'] = self.filename
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AudioTrack':
        return cls(
            url=str(data['url']),
            offset=float(data.get('offset', 0.0)),
            filename=data.get('filename'),
        )


@dataclass
class Drill:
    id: str
    name: str
    metadata: DrillMetadata = field(default_factory=DrillMetadata)
    frames: List[Frame] = field(default_factory=list)
    rider_names: Optional[Dict[str, str]] = None
    audio_track: Optional[AudioTrack] = None

    @classmethod
    def create(cls, name: str = 'Untitled Drill') -> 'Drill':
        """New drill seeded with a single empty frame"""
        drill = cls(id=new_id(), name=name)
        drill.frames.append(Frame(id=new_id(), index=0, duration=DEFAULT_FRAME_DURATION))
        return drill

    # ========================================
    # Queries
    # ========================================

    def get_frame(self, frame_id: str) -> Optional[Frame]:
        for frame in self.frames:
            if frame.id == frame_id:
                return frame
        return None

    def frame_index(self, frame_id: str) -> int:
        """Position of a frame in the sequence

        Raises:
            ValueError: If the frame is not in this drill
        """
        for i, frame in enumerate(self.frames):
            if frame.id == frame_id:
                return i
        raise ValueError(f"Frame with id '{frame_id}' not found")

    @property
    def total_duration(self) -> float:
        return sum(frame.duration for frame in self.frames)

    # ========================================
    # Invariants
    # ========================================

    def recompute_timestamps(self):
        """Reindex frames and rebuild timestamps from durations"""
        elapsed = 0.0
        for i, frame in enumerate(self.frames):
            frame.index = i
            frame.timestamp = elapsed
            elapsed += frame.duration

    def clone(self) -> 'Drill':
        """Structural deep copy of the whole drill"""
        return Drill(
            id=self.id,
            name=self.name,
            metadata=self.metadata.clone(),
            frames=[frame.clone() for frame in self.frames],
            rider_names=dict(self.rider_names) if self.rider_names is not None else None,
            audio_track=self.audio_track.clone() if self.audio_track else None,
        )

    # ========================================
    # Serialization
    # ========================================

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'name': self.name,
            'metadata': self.metadata.to_dict(),
            'frames': [frame.to_dict() for frame in self.frames],
        }
        if self.rider_names is not None:
            data['riderNames'] = dict(self.rider_names)
        if self.audio_track is not None:
            data['audioTrack'] = self.audio_track.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Drill':
        audio = data.get('audioTrack')
        riders = data.get('riderNames')
        drill = cls(
            id=str(data['id']),
            name=str(data.get('name', 'Untitled Drill')),
            metadata=DrillMetadata.from_dict(data.get('metadata') or {}),
            frames=[Frame.from_dict(f) for f in data.get('frames', [])],
            rider_names={str(k): str(v) for k, v in riders.items()} if riders else None,
            audio_track=AudioTrack.from_dict(audio) if audio else None,
        )
        drill.recompute_timestamps()
        return drill
