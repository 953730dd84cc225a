#!/usr/bin/env python3
"""
AudioNote microphone recorder

Records from the default input device, then uploads the recording to a
running AudioNote backend and prints the transcript.

Commands while running: p = pause, r = resume, s = stop,
u = upload, d = delete, q = quit.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from audionote.core.config import get_settings  # noqa: E402
from audionote.core.exceptions import AudioNoteError  # noqa: E402
from audionote.core.models import AudioBlob  # noqa: E402
from audionote.core.utils import format_duration  # noqa: E402
from audionote.services.audio import RecordingSession, SoundDeviceCapture  # noqa: E402
from audionote.ui.api_client import APIClient, APIError  # noqa: E402

HELP = "[p]ause [r]esume [s]top [u]pload [d]elete [q]uit"


def print_transcript(result: dict) -> None:
    """Print a transcription response."""
    print("-" * 60)
    print(result.get("transcription") or "(no speech recognized)")
    print("-" * 60)
    print(
        f"words={result.get('wordCount', 0)} "
        f"confidence={result.get('confidence', 0.0):.0%} "
        f"language={result.get('language', 'unknown')} "
        f"duration={format_duration(result.get('duration', 0))}"
    )


async def run(api_url: str, device: int | str | None) -> int:
    """Drive one recording session from keyboard commands."""
    settings = get_settings()
    client = APIClient(base_url=api_url)

    async def upload(blob: AudioBlob, filename: str) -> dict:
        return await asyncio.to_thread(client.transcribe, blob.data, filename, blob.media_type)

    capture = SoundDeviceCapture(
        sample_rate=settings.recorder_sample_rate,
        timeslice=settings.recorder_timeslice,
        device=device,
    )

    async with RecordingSession(capture, settings=settings) as session:
        try:
            await session.start()
        except AudioNoteError as exc:
            print(f"Error: {exc.detail}")
            return 1

        print(f"Recording... {HELP}")
        while True:
            command = (await asyncio.to_thread(input, f"[{session.state}] > ")).strip().lower()
            try:
                if command == "p":
                    await session.pause()
                elif command == "r":
                    await session.resume()
                elif command == "s":
                    blob = await session.stop()
                    print(
                        f"Stopped: {format_duration(session.elapsed_seconds)}, "
                        f"{blob.size} bytes, preview at {session.preview_path}"
                    )
                elif command == "u":
                    print("Transcribing...")
                    print_transcript(await session.upload(upload))
                    return 0
                elif command == "d":
                    session.delete()
                    print("Recording discarded.")
                    return 0
                elif command == "q":
                    return 0
                else:
                    print(HELP)
            except AudioNoteError as exc:
                print(f"Error: {exc.detail}")
            except APIError as exc:
                print(f"Upload failed: {exc.message}")
                if exc.details:
                    print(f"  {exc.details}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Record from the microphone and transcribe with AudioNote",
    )
    parser.add_argument(
        "--api-url",
        default=get_settings().api_base_url,
        help="AudioNote backend URL (default: %(default)s)",
    )
    parser.add_argument(
        "--device",
        default=None,
        help="Input device index or name (default: system default)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    device = int(args.device) if args.device and args.device.isdigit() else args.device
    try:
        return asyncio.run(run(args.api_url, device))
    except (KeyboardInterrupt, EOFError):
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
