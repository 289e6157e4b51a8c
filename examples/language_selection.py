"""
Language selection example.

Demonstrates language preferences and manual vs auto-generated tracks.
"""

import logging

from captrack import CaptionClient, NoMatchError

# Configure logging to see captrack internal logs
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

def main():
    client = CaptionClient()
    tracks = client.list_tracks("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

    # First of English, German, French that exists
    track = tracks.select(["en", "de", "fr"])
    print(f"Selected: {track}")

    try:
        print(f"Manual English track: {tracks.select_manual('en')}")
    except NoMatchError as e:
        print(e)

    try:
        print(f"Generated English track: {tracks.select_generated('en')}")
    except NoMatchError as e:
        print(e)

if __name__ == "__main__":
    main()
