"""Audio payload encoding for chat messages."""

import base64
import io
import wave

import numpy as np


def wav_base64(audio: np.ndarray, sample_rate: int = 16000) -> str:
    """Wrap float32 mono audio in a WAV container and base64-encode it.

    Args:
        audio: Float32 audio array in range [-1.0, 1.0].
        sample_rate: Samples per second.

    Returns:
        Base64 encoded WAV file.
    """
    pcm16 = (np.clip(audio, -1.0, 1.0) * 32767).astype(np.int16)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm16.tobytes())
    return base64.b64encode(buffer.getvalue()).decode("ascii")
