"""KYC Document OCR Service.

Turns uploaded Aadhaar card images into structured identity records:
image acquisition, OpenCV enhancement, OCR.Space text recognition and
regex-based field extraction behind a single validation gate.
"""
