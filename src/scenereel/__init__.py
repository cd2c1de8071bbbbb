"""scenereel — narrated image scenes to finished video.

Turn each still image into a Ken Burns clip, mux its narration, and join
the clips with cross-dissolve transitions (falling back to hard cuts when
that fails). Thumbnails and chapter marks are derived from the result.
All encoding is done by ffmpeg.
"""
