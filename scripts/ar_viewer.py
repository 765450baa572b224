
"""Run the live AR viewer for one experience.

Usage:
    uvicorn api.main:app --reload          # (separate, for API)
    python scripts/ar_viewer.py --id demo  # (to see the camera overlay window)

Press 'q' to quit the window.
"""
import argparse
import logging

from arview.config import Settings
from arview.experiences import ExperienceStore
from arview.live import run_ar_viewer

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--id", dest="experience_id", default=None, help="AR experience id")
    p.add_argument("--camera", type=int, default=None, help="Camera index override")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    s = Settings()
    experience = ExperienceStore.from_path(s.EXPERIENCES_PATH).get(args.experience_id)
    run_ar_viewer(s, experience, camera_index=args.camera)

if __name__ == '__main__':
    main()
