"""
Track metadata example.

Shows what a caption track carries besides its fragments: language, kind,
translatability, the locator its timed text is fetched from, and the timing
of individual fragments.
"""

from captrack import CaptionClient

def main():
    client = CaptionClient()
    video_id = "dQw4w9WgXcQ"

    track = client.list_tracks(video_id).select(["en"])

    print(f"Video id:        {track.video_id}")
    print(f"Language:        {track.language_name}")
    print(f"Language code:   {track.language_code}")
    print(f"Auto-generated:  {track.is_generated}")
    print(f"Translatable:    {track.is_translatable}")
    print(f"Locator:         {track.source_locator}")

    languages = track.translation_languages
    print(f"\nTranslation languages: {len(languages)}")
    for lang in languages[:5]:
        print(f"  {lang.language_code}: {lang.language_name}")

    fragments = client.fetch(track)
    if fragments:
        first = fragments[0]
        print(f"\nFirst fragment of {len(fragments)}:")
        print(f"  text:     {first.text}")
        print(f"  start:    {first.start:.2f}s")
        print(f"  duration: {first.duration}s")

if __name__ == "__main__":
    main()
