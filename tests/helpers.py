import fitz

SCHEMA_REPLY = (
    '{"concise_summary":"x","key_points":["a"],"novelty":"n",'
    '"limitations":"l","next_questions":["q"]}'
)


def make_pdf(*pages: str) -> bytes:
    """Builds a real PDF in memory, one page per argument. Empty string -> blank page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data
