# Tests package for imgsearch
