from vidshare.stores.base import SeedEntry

# Seeded as undeletable default videos on first boot
DEFAULT_VIDEOS = [
    SeedEntry("KzXnXhekOz4", "Amazing Music Video 1", "An incredible music video with amazing visuals and great beats."),
    SeedEntry("w9WgzE5WiyU", "Great Content 2", "High quality content that will keep you entertained."),
    SeedEntry("iYqqP1qcv5c", "Interesting Video 3", "Discover something new and interesting in this video."),
    SeedEntry("5ukPCvdY0YY", "Popular Video 4", "One of the most popular videos with millions of views."),
    SeedEntry("0TMi1bnsUZo", "Trending Video 5", "Currently trending - check out what everyone is watching."),
    SeedEntry("ZqwttIdH840", "Top Video 6", "Top rated content from creators you love."),
    SeedEntry("xVGCFuIiIG0", "Best Video 7", "The best videos handpicked for your enjoyment."),
    SeedEntry("aEw7d3EPnMU", "Awesome Content 8", "Awesome and engaging content that stands out."),
    SeedEntry("SpMsTsnYOss", "Live Stream Video 9", "Live streaming experience with real-time engagement."),
    SeedEntry("lZmvMW1ugRM", "Featured Video 10", "Featured content from the best creators."),
    SeedEntry("oK9oTZR-ee4", "Recommended Video 11", "Recommended just for you based on your preferences."),
    SeedEntry("8CCh_GLviFc", "Amazing Video 12", "Discover amazing content you will love watching."),
    SeedEntry("ZjxiNW-6aPU", "Great Short Video 13", "Quick and entertaining short form content."),
    SeedEntry("dcPOFGOC58o", "Interesting Video 14", "Fascinating content that keeps you engaged."),
    SeedEntry("to9DjfD-mm0", "Popular Video 15", "Popular video with thousands of views and engagement."),
    SeedEntry("kiiP56E_cCQ", "Trending Video 16", "Latest trending content everyone is watching."),
    SeedEntry("G9MPvy7RlS4", "Featured Video 17", "Specially featured content just for you."),
    SeedEntry("scu6_n8ozqE", "Best Video 18", "Best of the best videos curated for quality."),
    SeedEntry("r1ZM2vXiVvs", "Top Video 19", "Top rated and most viewed video of the month."),
    SeedEntry("_cESW8BwGoU", "Awesome Video 20", "Awesome content that stands out from the rest."),
    SeedEntry("4RW-vaVbS_0", "Trending Video 21", "Currently trending in the community worldwide."),
    SeedEntry("RzH5P-f4abg", "Recommended Video 22", "Recommended based on your viewing preferences."),
    SeedEntry("Ebe9NFgQnnU", "Great Video 23", "Great quality video with excellent production value."),
    SeedEntry("EZ2ZJxZhBoA", "Popular Video 24", "Popular across all platforms with great engagement."),
    SeedEntry("i40mxe8lUg0", "Featured Video 25", "Featured on homepage due to excellent quality."),
    SeedEntry("jjpjjcMeujM", "Best Video 26", "Best of our collection that you should watch."),
    SeedEntry("Z4hVGCWH1Kc", "Trending Video 27", "Trending now and gaining views every minute."),
]
