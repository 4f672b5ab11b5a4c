#!/usr/bin/env python
"""
Post a sample platform webhook to a running relay.

Builds an info or alert packet with the packet encoder, wraps it the way the
platform does and prints the server's answer.

Usage:
    python scripts/send_sample_uplink.py info
    python scripts/send_sample_uplink.py alert --no-water
    python scripts/send_sample_uplink.py info --endpoint view --url http://localhost:8000
"""
import argparse
import json
import sys
import time
from pathlib import Path

import httpx

# Add parent directory to sys.path
sys.path.append(str(Path(__file__).parent.parent))

from app.services.packets.decoder import encode_alert_packet, encode_info_packet


def build_packet(args: argparse.Namespace) -> bytes:
    now = int(time.time())
    if args.kind == "info":
        return encode_info_packet(
            sequence_number=args.sequence,
            device_time_s=now,
            latitude=args.lat,
            longitude=args.lng,
            elevation=args.elevation,
            temperature=args.temperature,
            battery_voltage=args.battery,
        )
    return encode_alert_packet(
        sequence_number=args.sequence,
        device_time_s=now,
        alert_status=args.no_water,
    )


def build_envelope(packet: bytes, terminal_id: str) -> dict:
    packet_entry = {
        "Timestamp": int(time.time() * 1000),
        "Value": packet.hex().upper(),
    }
    if terminal_id:
        packet_entry["TerminalId"] = terminal_id
    return {"Data": json.dumps({"Packets": [packet_entry]})}


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a sample uplink webhook.")
    parser.add_argument("kind", choices=["info", "alert"], help="Packet layout to send.")
    parser.add_argument("--url", default="http://localhost:8000", help="Relay base URL.")
    parser.add_argument("--endpoint", choices=["send-email", "view"], default="send-email")
    parser.add_argument("--terminal-id", default="sample-terminal")
    parser.add_argument("--sequence", type=int, default=1)
    parser.add_argument("--lat", type=float, default=-34.6037)
    parser.add_argument("--lng", type=float, default=-58.3816)
    parser.add_argument("--elevation", type=int, default=25)
    parser.add_argument("--temperature", type=int, default=21)
    parser.add_argument("--battery", type=int, default=3700, help="Battery voltage in mV.")
    parser.add_argument("--no-water", action="store_true", help="Set the alert flag.")
    args = parser.parse_args()

    packet = build_packet(args)
    envelope = build_envelope(packet, args.terminal_id)
    print(f"📦 Packet ({len(packet)} bytes): {packet.hex()}")

    try:
        response = httpx.post(f"{args.url}/api/{args.endpoint}", json=envelope, timeout=30.0)
    except httpx.HTTPError as e:
        print(f"❌ Request failed: {e}")
        return 1

    print(f"HTTP {response.status_code}")
    print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
