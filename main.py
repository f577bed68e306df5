"""Application entry point for FastAPI server."""
import uvicorn

if __name__ == "__main__":
    print("\n" + "="*60)
    print("  Geotechnical Raw Data API v1.0")
    print("="*60)
    print("\nEndpoints:")
    print("  POST /api/upload            - Replace raw dataset and trigger pipeline")
    print("  GET  /api/folders           - List storage folders")
    print("  GET  /api/files/{folder}    - List files in a folder")
    print("  POST /api/pipeline/start    - Re-run pipeline on current raw data")
    print("  GET  /api/pipeline/status   - Pipeline status")
    print("  GET  /api/pipeline/logs     - Pipeline logs")
    print("  GET  /api/health            - Storage connectivity")
    print("  GET  /health                - Health check")
    print("\nAPI Docs: http://localhost:3001/docs")
    print("="*60 + "\n")

    # Use import string format to enable reload mode
    uvicorn.run(
        "app.app:app",  # Import string instead of app object
        host="0.0.0.0",
        port=3001,
        reload=True,
        log_level="info"
    )
