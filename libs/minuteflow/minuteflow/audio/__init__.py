"""Audio preparation (decode, segment, encode)."""

from minuteflow.audio.decoder import DecodedAudio, decode_recording
from minuteflow.audio.preparer import AudioPreparer, segment_bounds
from minuteflow.audio.wav import encode_wav, float_to_pcm16

__all__ = [
    "AudioPreparer",
    "DecodedAudio",
    "decode_recording",
    "encode_wav",
    "float_to_pcm16",
    "segment_bounds",
]
