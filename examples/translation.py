"""
Translation example.

Demonstrates translating a track to Japanese and saving it as SRT.
"""

from captrack import CaptionClient, FetchConfig, fetch_from_config

def main():
    client = CaptionClient()
    track = client.list_tracks("dQw4w9WgXcQ").select(["en"])

    if "ja" not in track.translation_targets:
        print("Japanese translation not available")
        return

    japanese = client.translate(track, "ja")
    fragments = client.fetch(japanese)
    for fragment in list(fragments)[:2]:
        print(f"  [{fragment.start:.2f}s] {fragment.text}")

    # Same thing in one call, written to disk
    result = fetch_from_config(FetchConfig(
        video_id="dQw4w9WgXcQ",
        languages=["en"],
        translate_to="ja",
        output_format="srt",
        output_file="local/dQw4w9WgXcQ.ja.srt",
    ))
    print(f"Saved {result['fragments_count']} fragments to {result['output_path']}")

if __name__ == "__main__":
    main()
