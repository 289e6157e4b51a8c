"""
Basic captrack usage example.

Demonstrates listing the caption tracks of a video and fetching one.
"""

from captrack import CaptionClient

def main():
    client = CaptionClient()
    video_id = "dQw4w9WgXcQ"

    # List available tracks
    tracks = client.list_tracks(video_id)
    print(tracks)

    # First track, whatever its language
    track = tracks.select()
    fragments = client.fetch(track)
    print(f"\nUsing {track.language_name} ({track.language_code}): {len(fragments)} fragments")

    for fragment in list(fragments)[:10]:
        print(f"  [{fragment.start:.2f}s] {fragment.text}")

if __name__ == "__main__":
    main()
