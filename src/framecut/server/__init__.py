"""HTTP surface for upload, frame sampling and clip export."""
