"""
Output formats example.

Demonstrates rendering one transcript as text, JSON, SRT and WebVTT.
"""

from captrack import CaptionClient, FormatKind

def main():
    client = CaptionClient()
    fragments = client.get_transcript("dQw4w9WgXcQ", languages=["en"])

    for kind in FormatKind:
        output = client.format(fragments, kind)
        print(f"{kind.value} (first 300 chars):")
        print(output[:300] + "...\n")

if __name__ == "__main__":
    main()
