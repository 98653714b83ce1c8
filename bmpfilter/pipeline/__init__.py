from .process_image import process_bmp, process_file, default_output_path
