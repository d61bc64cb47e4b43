class TxtExtractor:
    def extract(self, file_data: bytes) -> str:
        # Malformed sequences become U+FFFD instead of failing
        return file_data.decode("utf-8", errors="replace").strip()
