"""Application layer: analysis pipeline wiring capture, calibration and volume control."""
