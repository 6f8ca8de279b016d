"""
SonicState v1 Analysis

Frame-level analyzers and the feature extractor built on them:
    pitch        - F0 estimation (difference-function method, autocorrelation)
    spectral     - Hann window, radix-2 FFT, spectral centroid
    time_domain  - RMS energy, zero-crossing rate
    features     - Buffer-level AcousticFeatures
"""
