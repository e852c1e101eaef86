# ---- Configuration ----
scale = 10
width, height = 64, 32
window_width, window_height = width * scale, height * scale

# ~540 Hz CPU / 60 Hz display = 9 cycles per frame, rounded up to 10
cycles_per_frame = 10
timer_HZ = 60

pixel_color = (255, 255, 255)

memory_size = 4096
program_start = 0x200

#make it true if you want the logs (F1 toggles it in the window)
logsOn = False
