"""
Cafe Details - Web Server Entry Point
=====================================

Run this to start the API:
    python main.py

Then open http://127.0.0.1:8000/api/cafes/<place_id>?name=<cafe name>

To print one cafe's details in the terminal:
    python show_cafe.py <place_id> --name "Cafe Name"
"""

import logging

import uvicorn


def main():
    """Start the web server."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    print("\n" + "=" * 50)
    print("   Cafe Details - API Server")
    print("=" * 50)
    print("\n   Starting server at http://127.0.0.1:8000")
    print("   Press Ctrl+C to stop\n")

    uvicorn.run(
        "cafe_details.web.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
