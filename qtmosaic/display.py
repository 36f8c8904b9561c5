import cv2

from .utils import to_bgra_array

ESC_KEY = 27


def show(output, width, height, title='Quadtree'):
    """
    Show a rendered buffer in an OpenCV window until ESC is pressed or the window is closed.
    """
    # Alpha is ignored, as on an XRGB surface
    image = cv2.cvtColor(to_bgra_array(output, width, height), cv2.COLOR_BGRA2BGR)

    print("Showing the quadtree window, press <ESC> to quit.")
    cv2.namedWindow(title, cv2.WINDOW_AUTOSIZE)
    cv2.imshow(title, image)

    while True:
        key = cv2.waitKey(50)
        if key & 0xFF == ESC_KEY:
            break
        if cv2.getWindowProperty(title, cv2.WND_PROP_VISIBLE) < 1:
            break

    cv2.destroyAllWindows()
