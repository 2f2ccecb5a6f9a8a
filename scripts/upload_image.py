"""
Upload one or more images to a running Image Upload Service and print their URLs.
"""
import os
import sys
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env"))

from src.client.upload_client import ImageUploadClient, UploadClientError


def main():
    parser = argparse.ArgumentParser(description="Upload images to the Image Upload Service")
    parser.add_argument("files", nargs="+", help="Image files to upload")
    parser.add_argument(
        "--api-url",
        default=os.getenv("UPLOAD_API_URL", "http://localhost:8000"),
        help="Service base URL",
    )
    parser.add_argument("--content-type", default=None, help="Override the guessed content type")
    parser.add_argument("--no-policy", action="store_true", help="Skip fetching the service policy")
    args = parser.parse_args()

    client = ImageUploadClient(args.api_url)
    if not args.no_policy:
        client.fetch_policy()

    failures = 0
    for path in args.files:
        try:
            result = client.upload(path, content_type=args.content_type)
        except UploadClientError as e:
            failures += 1
            print(f"  ✗ {path}: {e.kind} — {e.message}")
            continue
        print(f"  ✓ {path} → {result.public_url} ({result.size_in_bytes} bytes, id={result.id})")

    print(f"\n{len(args.files) - failures}/{len(args.files)} uploaded")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
