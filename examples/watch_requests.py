#!/usr/bin/env python3
"""
Interactive Bluetooth debugging demo.

Monitors request_device() on a stand-in host API, then decodes a few
sample GAN cube frames.
"""

import asyncio
import logging
import sys
from pathlib import Path
from types import SimpleNamespace

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from btdebug import enable_debugging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)

SAMPLE_FRAMES = [
    bytes([0x00, 0x00, 0x00, 0x01, 0x12, 0x34]),
    bytes([0x00, 0x00, 0x00, 0xED]),
    bytes([0x00, 0x00, 0x00, 0xEF, 0x64]),
    bytes([0x00, 0x00, 0x00, 0x99]),
    bytes([0x00, 0x01]),
]


class NotFoundError(Exception):
    pass


class DemoBluetooth:
    """Host API stand-in that offers one GAN cube, then nothing."""

    def __init__(self):
        self.devices = [SimpleNamespace(name="GAN12ui")]

    async def request_device(self, options=None):
        await asyncio.sleep(0.1)
        if not self.devices:
            raise NotFoundError("User cancelled the requestDevice() chooser.")
        return self.devices.pop()


async def main():
    bluetooth = DemoBluetooth()
    debugger = enable_debugging(bluetooth)

    for attempt in range(2):
        print(f"\nRequesting a GAN cube (attempt {attempt + 1})...")
        try:
            device = await bluetooth.request_device({"filters": [{"namePrefix": "GAN"}]})
            print(f"Got device {device.name}")
        except NotFoundError as e:
            print(f"No device: {e}")

    print("\nDecoding sample frames...")
    for frame in SAMPLE_FRAMES:
        debugger.debug_gan_cube(frame)

    print("\nLog history:")
    for line in debugger.lines():
        print(f"  {line}")


if __name__ == "__main__":
    asyncio.run(main())
