#!/usr/bin/env python3
"""Helper script to check and create the .env file for BroodBot settings."""

from pathlib import Path
import os

TEMPLATE = """# Local state (machine list and cached user location)
BROODBOT_DATA_ROOT=./data
# BROODBOT_STORAGE_FILE=./data/broodbot.json

# Location used when geolocation is unavailable (Utrecht centre)
BROODBOT_FALLBACK_LATITUDE=52.0907
BROODBOT_FALLBACK_LONGITUDE=5.1214

# IP geolocation endpoint (optional - leave empty to always use the fallback)
# BROODBOT_GEOLOCATION_URL=https://ipapi.co/json/

# Reverse geocoding
BROODBOT_NOMINATIM_URL=https://nominatim.openstreetmap.org
BROODBOT_GEOCODING_LANGUAGE=nl

# Query defaults
BROODBOT_DEFAULT_RADIUS_KM=20
BROODBOT_DEFAULT_NEAREST_LIMIT=5

BROODBOT_LOG_LEVEL=INFO
"""


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("BroodBot Environment Checker")
    print("=" * 60)
    print()

    if env_file.exists():
        print(f"✅ Found .env file at: {env_file}")
    else:
        print(f"❌ .env file NOT found at: {env_file}")
        print("Creating template .env file...")
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"✅ Created .env file at: {env_file}")
    print()

    overrides = sorted(name for name in os.environ if name.startswith("BROODBOT_"))
    if overrides:
        print("Environment overrides:")
        for name in overrides:
            print(f"  {name}={os.environ[name]}")
        print()

    print("Testing config loading...")
    print()
    try:
        import sys
        sys.path.insert(0, str(project_root / "src"))
        from broodbot.config import configure_logging, settings
        configure_logging()

        print(f"  storage file:        {settings.resolved_storage_file}")
        print(f"  fallback location:   {settings.fallback_latitude}, {settings.fallback_longitude}")
        print(f"  geolocation URL:     {settings.geolocation_url or '(none, fallback only)'}")
        print(f"  nominatim URL:       {settings.nominatim_url}")
        print(f"  default radius (km): {settings.default_radius_km}")
        print(f"  nearest limit:       {settings.default_nearest_limit}")
        print()
        print("=" * 60)
        print("✅ SUCCESS: configuration loaded")
        print("=" * 60)
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print()
        print("Make sure variables start with the BROODBOT_ prefix and values are valid")


if __name__ == "__main__":
    main()
